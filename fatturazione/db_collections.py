"""
Definizione centralizzata delle collezioni MongoDB.
Unica fonte di verità per i nomi delle collezioni.
"""

COLL_DOCUMENTS = "documents"
COLL_CLIENTS = "clients"
COLL_SEQUENCES = "sequences"

# Chiave del contatore globale della numerazione progressiva
SEQUENCE_DOCUMENTS = "documents"
