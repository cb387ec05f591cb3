"""
Feature modules for FitClub.

- clients - Tenants and platform stats
- users - Athletes, CSV import
- activities - Ingestion, duration rules, proof policy
- leaderboard - Ranking by total distance
- certificates - Milestone certificates
- strava - OAuth, sync, webhooks

Each feature is a self-contained module with:
- models.py - SQLAlchemy models
- schemas.py - Pydantic schemas
- service.py - Business logic
- repository.py - Data access (optional)

Cross-feature imports target submodules (app.features.users.models),
never the package, to keep import order free of cycles.
"""
