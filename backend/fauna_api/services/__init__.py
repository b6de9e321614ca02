# Services package init
"""
Fauna API: Services Layer
============================

What:  Business logic between routes (HTTP) and MongoDB (persistence).

Service Inventory:
    - DocumentService (base): deadline-bounded store calls and error translation
    - AnimalService:   joined reads through the aggregation pipeline
    - SpeciesService:  category-reference parsing, category_id filter
    - CategoryService: name-only documents
    - query_builder:   ObjectId parsing, substring filters, pipeline stages
"""
