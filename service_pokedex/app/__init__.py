"""
Pokedex Service package for the Pokedex Access Layer.

The service is a read-through caching proxy in front of two rate-limited
upstreams: PokeAPI for creature profiles and FunTranslations for styled
descriptions.

Structure:
- app.main: FastAPI app, routes, and error-to-status wiring.
- app.orchestrator: Cache-or-fetch flows for profiles and translations.
- app.adapters: HTTP clients for the upstream APIs.
- app.caching: In-process, lock-guarded cache tables.
- app.domain: Pure rules (description selection, translation routing).
"""
