"""
Clasificación de intenciones y generación de respuestas.
"""
