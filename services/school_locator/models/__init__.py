from .schools import School
