# Bounds for the recommendation pipeline.
RETRIEVAL_LIMIT = 10  # Max candidates kept after ranking (general recommendation call)
COMPARISON_LIMIT = 5  # Max candidates sent to the comparison call

# Value math: a zero rating counts as 1 so price/rating never divides by zero
UNRATED_EFFECTIVE_RATING = 1.0

# Text truncation for LLM payloads
REVIEWS_MAX_CHARS = 300
DESCRIPTION_MAX_CHARS = 200

# Languages
LANG_HINDI = "hindi"
LANG_TAMIL = "tamil"
LANG_TELUGU = "telugu"
LANG_KANNADA = "kannada"
LANG_MARATHI = "marathi"
LANG_GUJARATI = "gujarati"
LANG_BENGALI = "bengali"
LANG_PUNJABI = "punjabi"

# Languages the translation call handles natively
NATIVE_LANGUAGES = {LANG_HINDI, LANG_TAMIL, LANG_TELUGU, LANG_KANNADA, LANG_MARATHI, LANG_GUJARATI}

# Known but served through the fallback language
EXTENDED_LANGUAGES = {LANG_BENGALI, LANG_PUNJABI}

FALLBACK_LANGUAGE = LANG_HINDI

# Image types accepted by the vision call
IMAGE_MIME_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
