"""
Habit Tracker Backend — Services Layer
========================================

Service Inventory:
    - AccountService: registration, login/authentication, account lookup/update
    - HabitService:   habit create / list / update / delete

Services receive their collaborators (repositories, hasher, token service)
through the constructor and the AsyncSession per call.
"""
