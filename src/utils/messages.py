"""
User-facing status messages.
"""

REVIEW_SAVED = "Recensione salvata. Grazie!"
REVIEW_SAVE_ERROR = "Impossibile salvare la recensione. Riprova."
REVIEWS_LOADING_ERROR = "Impossibile caricare le recensioni."
REVIEWS_EMPTY_STATE = "Ancora nessuna recensione. Scrivi la prima!"
REVIEW_DELETE_ERROR = "Impossibile eliminare la recensione."
