"""Taskvora: senhas de aplicações com validade e lembretes com aviso por e-mail."""

__version__ = "1.0.0"
