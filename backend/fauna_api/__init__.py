"""
Fauna API: Application Package Initializer
=============================================

What: REST API for animals, species and categories stored in MongoDB.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ID parsing, $set building, pipelines
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │     Database (Persistence)          │  ← AsyncMongoClient, per-request deadline
    └─────────────────────────────────────┘

    Reference chain: animals.species → species._id, species.category → categories._id
"""

__version__ = "1.0.0"
