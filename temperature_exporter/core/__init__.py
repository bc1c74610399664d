"""Core module - Pipeline MQTT → registro de sensores.

Estructura:
- transport/   → Cliente MQTT, cola con backpressure, handler
- routing/     → Topic → id de nodo
- domain/      → Reading y decodificación binaria
- registry/    → Registro de sensores y desalojo periódico
- monitoring/  → Stats
"""
