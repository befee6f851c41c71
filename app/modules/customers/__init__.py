"""
Módulo de Clientes

- Clientes (personas naturales y/o empresas)
- Personas de contacto por cliente
"""

from .models import Customer, ContactPerson
from .service import CustomerService
from .router import customers_router

__all__ = ["Customer", "ContactPerson", "CustomerService", "customers_router"]
