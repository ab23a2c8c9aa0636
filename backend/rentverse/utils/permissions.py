"""
Static role-permission matrix for the admin console.
"""

ADMIN_ROLES = ("SUPER_ADMIN", "ADMIN", "MODERATOR", "FINANCE", "SUPPORT", "ANALYST")

MODULES = (
    "dashboard", "users", "listings", "bookings", "payments", "content", "ai",
    "features", "notifications", "moderation", "analytics", "audit", "system",
    "settings",
)
ACTIONS = ("read", "write", "delete", "approve", "manage")

ROLE_PERMISSIONS: dict[str, frozenset[tuple[str, str]]] = {
    "SUPER_ADMIN": frozenset((m, a) for m in MODULES for a in ACTIONS),
    "ADMIN": frozenset({
        ("dashboard", "read"),
        ("users", "read"), ("users", "write"), ("users", "manage"),
        ("listings", "read"), ("listings", "write"), ("listings", "delete"), ("listings", "approve"),
        ("bookings", "read"), ("bookings", "write"),
        ("payments", "read"), ("payments", "write"),
        ("content", "read"), ("content", "write"),
        ("notifications", "read"), ("notifications", "write"),
        ("moderation", "read"), ("moderation", "write"), ("moderation", "approve"),
        ("analytics", "read"),
        ("audit", "read"),
        ("system", "read"),
    }),
    "MODERATOR": frozenset({
        ("dashboard", "read"),
        ("users", "read"), ("users", "write"),
        ("listings", "read"), ("listings", "write"), ("listings", "delete"), ("listings", "approve"),
        ("bookings", "read"),
        ("content", "read"), ("content", "write"),
        ("notifications", "read"), ("notifications", "write"),
        ("moderation", "read"), ("moderation", "write"), ("moderation", "approve"),
        ("audit", "read"),
    }),
    "FINANCE": frozenset({
        ("dashboard", "read"),
        ("users", "read"),
        ("listings", "read"),
        ("bookings", "read"), ("bookings", "write"),
        ("payments", "read"), ("payments", "write"), ("payments", "manage"),
        ("analytics", "read"),
        ("audit", "read"),
    }),
    "SUPPORT": frozenset({
        ("dashboard", "read"),
        ("users", "read"),
        ("listings", "read"),
        ("bookings", "read"),
        ("moderation", "read"),
        ("audit", "read"),
    }),
    "ANALYST": frozenset({
        ("dashboard", "read"),
        ("users", "read"),
        ("listings", "read"),
        ("bookings", "read"),
        ("payments", "read"),
        ("analytics", "read"), ("analytics", "manage"),
        ("audit", "read"),
    }),
}


def is_admin_role(role: str | None) -> bool:
    return role in ADMIN_ROLES


def has_permission(role: str, module: str, action: str) -> bool:
    return (module, action) in ROLE_PERMISSIONS.get(role, frozenset())


def accessible_modules(role: str) -> list[str]:
    granted = {m for m, _ in ROLE_PERMISSIONS.get(role, frozenset())}
    return [m for m in MODULES if m in granted]
