# repodeps/modules/utils.py

import os


class Utils:
    """
    Funções utilitárias gerais usadas por outros módulos.
    """

    @staticmethod
    def canonical_path(*parts):
        """
        Caminho absoluto normalizado, usado como chave única de diretório.

        Resolve symlinks, '..', separadores repetidos ou finais e,
        em sistemas case-insensitive, a caixa das letras.
        """
        path = os.path.join(*parts)
        return os.path.normcase(os.path.realpath(os.path.abspath(os.path.expanduser(path))))

    @staticmethod
    def ensure_dir(path):
        """
        Cria diretório se não existir.
        """
        os.makedirs(path, exist_ok=True)
        return path

    @staticmethod
    def is_git_repository(path):
        return os.path.exists(os.path.join(path, ".git"))

    @staticmethod
    def strip_archive_ext(filename):
        """
        Remove extensões de arquivo de pacote: 'lib.1.0.tar.gz' -> 'lib.1.0'.
        """
        for ext in (".tar.gz", ".tar.bz2", ".tar.xz", ".tgz", ".zip", ".whl", ".nupkg", ".tar"):
            if filename.endswith(ext):
                return filename[: -len(ext)]
        return os.path.splitext(filename)[0]
