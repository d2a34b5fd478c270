"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

from utils.locking import ResourceLockRegistry

# Per-resource write locks shared by every request thread in the process
resource_locks = ResourceLockRegistry()
