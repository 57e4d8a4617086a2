"""
Protofolio Backend — API Routes Package
=========================================

Route Inventory:
    - records.py: GET    /records          (filtered, ordered list)
                  POST   /records          (create)
                  GET    /records/{id}     (detail)
                  PUT    /records/{id}     (full replace)
                  DELETE /records/{id}     (hard delete)
    - health.py:  GET    /health           (service + store status)

Routes stay thin: parse the request, call RecordService, return the model.
"""
