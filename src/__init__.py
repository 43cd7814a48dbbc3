"""
climate-finance-search - search and filtering core for a climate-finance tracker.

Busca y filtra proyectos, fuentes de financiamiento y documentos de un
portal de financiamiento climático, y los expone a cualquier AI agent.

Stack:
- Python + FastMCP (SDK oficial)
- httpx (cliente de la API REST)
- YAML (datos mock de respaldo)
- SSE (transporte HTTP remoto)
"""

__version__ = "0.1.0"
__author__ = "macward"
