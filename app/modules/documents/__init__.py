"""
Núcleo compartido de los documentos comerciales

- lifecycle: máquinas de estado de cotizaciones, pedidos y facturas
- models / schemas: columnas y esquemas comunes
- service: CRUD genérico con ítems
- conversion: Cotización → Pedido → Factura en una transacción
"""
