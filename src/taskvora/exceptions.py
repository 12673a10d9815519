"""
taskvora/exceptions.py: Erros de domínio.

Todos herdam de ValueError: os controllers sinalizam problema de entrada
com ValueError e as rotas traduzem para o status HTTP certo.
"""


class TaskvoraError(ValueError):
    """Base de todos os erros de domínio do Taskvora."""


class ValidationError(TaskvoraError):
    """Entrada inválida (data ruim, data no passado, campo obrigatório vazio)."""


class DuplicateEmailError(TaskvoraError):
    def __init__(self, email: str):
        super().__init__("Email already exists. Please use a different email.")
        self.email = email


class DuplicateEmployeeIdError(TaskvoraError):
    def __init__(self, employee_id: str):
        super().__init__("Employee ID already exists. Please use a different Employee ID.")
        self.employee_id = employee_id


class NotFoundError(TaskvoraError):
    """Registro inexistente ou de outro dono."""


class InvalidCredentialsError(TaskvoraError):
    def __init__(self):
        super().__init__("Invalid credentials")


class DecryptionError(TaskvoraError):
    """Token cifrado não foi gerado com a chave atual ou está corrompido."""
