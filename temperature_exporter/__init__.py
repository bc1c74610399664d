"""Exporter MQTT → Prometheus de temperaturas DS18B20.

Estructura:
- core/        → Pipeline: transporte, routing, dominio, registro
- metrics/     → Binding con el gauge Prometheus
- endpoints/   → HTTP (/metrics, /health, /nodes)
- cli.py       → Arranque del proceso
"""
