"""
Protofolio Backend — Services Layer
=====================================

Service Inventory:
    - RecordService: record lifecycle (create/get/update/delete) and the
      filtered list query. Stateless; receives the db session per call.
"""
