"""
Utilidades: fechas, reglas de lenguaje, almacenes en memoria e IA.
"""
