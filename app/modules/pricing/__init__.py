"""
Cálculo de totales de documentos (subtotal, descuento, impuesto, total)
"""
