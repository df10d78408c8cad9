from formcraft.api.routers import forms_router, question_types_router, responses_router

__all__ = ["forms_router", "question_types_router", "responses_router"]
