"""Authentication and tenant-scoped authorization.

Three layers, each usable on its own:
1. password / jwt → hash secrets, issue and validate signed identity tokens
2. dependencies   → turn an Authorization header into an IdentityContext
3. guard          → pure ALLOW/DENY decisions over an IdentityContext

Every business operation receives the IdentityContext as an argument;
nothing reads a "current user" from ambient state.
"""
