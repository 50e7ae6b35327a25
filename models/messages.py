"""
Centralized Bilingual Message System for Whiteboard AI
======================================================

Provides all user-facing messages (errors, success, warnings) in both French and English.
Used by the workflow and the API endpoints to return localized messages.
"""

from typing import Literal

Language = Literal["fr", "en"]


class Messages:
    """Centralized bilingual message system"""

    # API Error Messages
    ERRORS = {
        "invalid_prompt": {
            "fr": "Le message est vide ou invalide",
            "en": "Invalid or empty prompt",
        },
        "prompt_too_long": {
            "fr": "Message trop long (maximum {} caractères)",
            "en": "Prompt too long (max {} characters)",
        },
        "generation_failed": {
            "fr": "Je n'ai pas pu générer le contenu. Réessayez dans un instant.",
            "en": "I couldn't generate the content. Please try again in a moment.",
        },
        "ai_not_configured": {
            "fr": "Assistant IA non configuré",
            "en": "AI assistant not configured",
        },
        "unsupported_diagram_type": {
            "fr": "Type de contenu non pris en charge : {}",
            "en": "Unsupported content type: {}",
        },
        "internal_error": {
            "fr": "Erreur interne du serveur",
            "en": "Internal server error",
        },
    }

    # Success Messages
    SUCCESS = {
        "diagram_generated": {
            "fr": "Contenu ajouté au tableau blanc",
            "en": "Content added to the whiteboard",
        },
    }

    # Warning Messages
    WARNINGS = {
        "fallback_used": {
            "fr": "Contenu de secours utilisé : la réponse de l'IA était inutilisable",
            "en": "Fallback content used: the AI response was unusable",
        },
        "handled_by_chat": {
            "fr": "Cette demande est traitée par la conversation",
            "en": "This request is handled by the chat",
        },
    }

    @classmethod
    def get(cls, category: str, key: str, lang: Language = "fr", *args) -> str:
        """
        Get a message in the specified language.

        Args:
            category: Message category ('ERRORS', 'SUCCESS', 'WARNINGS')
            key: Message key
            lang: Language ('fr' or 'en')
            *args: Format arguments for messages with placeholders

        Returns:
            Localized message string
        """
        messages = getattr(cls, category, {})
        message_dict = messages.get(key, {})
        # Fallback order: requested lang -> fr -> key
        message = message_dict.get(lang) or message_dict.get("fr") or key

        if args:
            try:
                return message.format(*args)
            except (IndexError, KeyError):
                return message

        return message

    @classmethod
    def error(cls, key: str, lang: Language = "fr", *args) -> str:
        """Get an error message"""
        return cls.get("ERRORS", key, lang, *args)

    @classmethod
    def success(cls, key: str, lang: Language = "fr", *args) -> str:
        """Get a success message"""
        return cls.get("SUCCESS", key, lang, *args)

    @classmethod
    def warning(cls, key: str, lang: Language = "fr", *args) -> str:
        """Get a warning message"""
        return cls.get("WARNINGS", key, lang, *args)


# Convenience function for getting language from request
def get_request_language(language_header: str = None, accept_language: str = None) -> Language:
    """
    Determine language from request headers.

    Args:
        language_header: Custom X-Language header
        accept_language: Accept-Language header

    Returns:
        'fr' or 'en'
    """
    # Priority 1: Custom X-Language header
    if language_header:
        lang = language_header.lower()
        if lang in ["en", "en-us", "en-gb", "english"]:
            return "en"
        return "fr"

    # Priority 2: Accept-Language header, first listed language wins
    if accept_language:
        first = accept_language.split(",")[0].strip().lower()
        if first.startswith("en"):
            return "en"

    # Default: French
    return "fr"
