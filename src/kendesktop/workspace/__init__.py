"""Thread workspaces — one directory per conversation thread.

Provides WorkspaceProvisioner for creating and reusing thread directories
under the application workspace root, and normalize_thread_id() for turning
host-supplied thread ids into safe directory names.
"""
