"""Service layer — read-only analyses returning ServiceResult."""
