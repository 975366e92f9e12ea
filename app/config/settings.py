import os

# Backend de almacenamiento: "firestore" (produccion) o "memory" (un solo proceso / pruebas)
PRESENCE_BACKEND = os.getenv("PRESENCE_BACKEND", "firestore").lower()

# Firebase
FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "/app/keys/serviceAccountKey.json")
EVENTS_COLLECTION = os.getenv("EVENTS_COLLECTION", "presence_events")
HEADS_COLLECTION = os.getenv("HEADS_COLLECTION", "presence_heads")
STUDENTS_COLLECTION = os.getenv("STUDENTS_COLLECTION", "students")

# Directorio local de estudiantes (JSON) para el backend "memory"
STUDENTS_FILE = os.getenv("STUDENTS_FILE", "students.json")

# Zona horaria IANA del punto de control; vacio = zona local del servidor
TIMEZONE = os.getenv("TIMEZONE", "")

# Reintentos del registro de escaneo ante conflictos de escritura
SCAN_MAX_ATTEMPTS = int(os.getenv("SCAN_MAX_ATTEMPTS", "3"))
STORE_WORKERS = int(os.getenv("STORE_WORKERS", "4"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "presence.log")

# Servidor
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if origin.strip()]
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
