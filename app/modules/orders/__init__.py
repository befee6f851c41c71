"""
Módulo de Pedidos (Orders)

- Pedidos creados directamente o por conversión de una cotización
- Estados: pending, processing, completed (solo por conversión), cancelled
- Conversión a factura: POST /orders/{id}/convert-to-invoice
"""
