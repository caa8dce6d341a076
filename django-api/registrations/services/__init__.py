from registrations.services.registration_service import (
    Invoice,
    Quote,
    RegistrationService,
    SkippedLineItem,
)

__all__ = ["RegistrationService", "Quote", "Invoice", "SkippedLineItem"]
