from formcraft.services.form_service import FormService

__all__ = ["FormService"]
