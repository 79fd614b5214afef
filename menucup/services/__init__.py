"""
                        Services Module

External collaborators behind the hybrid architecture pattern.
Each service has Mock (development) and Real (production) implementations.

Services:
    - auth: Supabase identity (mock: local users + JWT)
    - storage: MinIO/S3 object storage (mock: in-memory)
    - email: SendGrid lead delivery (mock: logged outbox)
    - qr: QR code rendering for public menu links
"""

from menucup.services.qr import QRService, qr_service

__all__ = ["QRService", "qr_service"]
