# app/core/constants.py

# ==========================================================
# ROOMS (dashboard lists every room, even with zero requests)
# ==========================================================
ROOM_TYPES = [
    "Auditorium",
    "Decennial",
    "Insight",
    "415/416",
    "Guest Room",
    "Main Dinning Hall",
    "Dinning Hall Near Decennial",
    "OTHER (Enter Remarks)",
]

# ==========================================================
# UPLOADS
# ==========================================================
ALLOWED_UPLOAD_EXTENSIONS = {
    ".jpeg", ".jpg", ".png", ".gif", ".bmp", ".webp",
    ".pdf", ".doc", ".docx", ".txt",
}

UPLOADS_URL_PREFIX = "/uploads"
