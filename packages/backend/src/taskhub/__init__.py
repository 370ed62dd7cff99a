"""TaskHub — multi-tenant task management backend.

Organizations share one deployment while their projects, tasks and
comments stay isolated. Users authenticate with bearer tokens; every
data access is scoped to the caller's tenant and checked by role.
"""

__version__ = "0.1.0"
