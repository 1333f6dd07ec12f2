"""
Service layer modules.

These modules encapsulate the data access of the app:
- Backend clients for Supabase and Firebase
- The in-memory demo store used as fallback
- Auth, signals and admin facades (backend first, mock on failure)
- The randomized backtest simulator
- Chart image analysis through Gemini
"""
