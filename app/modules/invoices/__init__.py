"""
Módulo de Facturación (Invoices)

- Facturas creadas directamente o por conversión de un pedido
- Estados: draft, sent, paid, cancelled
- Vencimiento por defecto: fecha de factura + plazo de pago configurado
- Las facturas pagadas alimentan el reporte de ingresos
"""
