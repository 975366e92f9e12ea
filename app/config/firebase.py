import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

from app.config import settings

logger = logging.getLogger(__name__)

# Variable global para controlar la inicialización
_firebase_initialized = False
_db = None


def initialize_firebase(cred_path: str = None) -> bool:
    """Inicializa la conexión con Firebase solo una vez"""
    global _firebase_initialized

    if _firebase_initialized:
        return True

    try:
        cred_path = cred_path or settings.FIREBASE_CREDENTIALS
        # Fallback para desarrollo local
        if not os.path.exists(cred_path):
            cred_path = os.path.join(os.path.dirname(__file__), "..", "..", "keys", "serviceAccountKey.json")

        logger.info(f"🔑 Intentando cargar credenciales desde: {cred_path}")

        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"No se encontró el archivo de credenciales en: {cred_path}")

        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)
        _firebase_initialized = True
        logger.info("✅ Firebase inicializado correctamente")
        return True
    except Exception as e:
        logger.error(f"❌ Error al inicializar Firebase: {e}")
        return False


def get_db():
    """Devuelve el cliente de Firestore, inicializando Firebase si hace falta"""
    global _db

    if _db is None:
        if not initialize_firebase():
            raise RuntimeError("Firebase no está inicializado")
        _db = firestore.client()
    return _db
