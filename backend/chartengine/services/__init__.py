"""
Chart Engine Services

Service layer containing all indicator, aggregation and streaming logic.
Each service has a defined interface (contract) and implementation.
"""

from chartengine.services.base import BaseService, ServiceError

__all__ = ["BaseService", "ServiceError"]
