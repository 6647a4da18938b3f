"""
Lipa Gateway - Flexible Installment Payment Service

A FastAPI-based microservice that runs the "Lipa Mdogo Mdogo"
buy-now-pay-later engine: plan schedules, installment orders,
payment application, rescheduling and financial health.
"""

__version__ = "0.1.0"
