"""
Módulo de Cotizaciones (Quotes)

- Cotizaciones con ítems y totales calculados
- Estados: draft, sent, approved (solo por conversión), rejected, expired
- Conversión a pedido: POST /quotes/{id}/convert-to-order
"""
