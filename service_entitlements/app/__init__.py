"""
Entitlements service package.

Answers "which bundles is this organization entitled to, and are they
trials?" for the calling identity. It provides:

- app.main: API surface (entitlements, bundle listing, health, metrics).
- app.bundles: Bundle catalog, evaluation engine and dependency errors.
- app.subscriptions: Client for the upstream Subscriptions Service.
- app.identity: Decoding of the forwarded caller identity.

Guidelines:
- Evaluation is pure; all I/O happens in the handler and the client.
- The bundle catalog is replaced wholesale on reload, never edited in place.
"""
