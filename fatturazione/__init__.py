"""
Fatturazione: calcolo fiscale e ciclo di vita di fatture, note di credito e
note di debito.
"""
__version__ = "1.0.0"
