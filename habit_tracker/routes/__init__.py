"""
Habit Tracker Backend — API Routes Package
============================================

Route Inventory:
    - accounts.py: POST /api/register, POST /api/login,
                   GET /api/user?userId=, PUT /api/user
    - habits.py:   POST /api/habits, GET /api/habits?userId=,
                   PUT /api/habits/{id}, DELETE /api/habits/{id}
    - health.py:   GET /health

Routes are THIN: extract request data, call the service obtained from
dependencies.py, return the response model. Access control happens before
any route runs (middleware/auth.py).
"""
