"""
credenciamento — Back-office сервис сети аккредитации (empresas, funcionários,
credenciadoras, credenciados, planos, solicitações).
"""

__version__ = "0.1.0"
