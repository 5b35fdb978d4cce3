import configparser
import os

DEFAULT_LOCATIONS = [
    "/etc/repodeps/repodeps.conf",
    os.path.expanduser("~/.config/repodeps/repodeps.conf"),
    os.path.join(os.getcwd(), "repodeps.conf"),
]

ENV_VAR = "REPODEPS_CONF"


def default_locations():
    env = os.environ.get(ENV_VAR)
    if env:
        return [env] + DEFAULT_LOCATIONS
    return list(DEFAULT_LOCATIONS)


class RepoDepsConfig:
    def __init__(self, locations=None):
        self.locations = locations or default_locations()
        self.config = configparser.ConfigParser()
        self.loaded_from = None
        self.reload()

    def reload(self):
        """(Re)carrega a configuração do primeiro arquivo disponível.

        Sem arquivo nenhum, ficam valendo os fallbacks de cada chamada.
        """
        self.config = configparser.ConfigParser()
        self.loaded_from = None
        for path in self.locations:
            if os.path.isfile(path):
                self.config.read(path)
                self.loaded_from = path
                return

    def update(self, section, **values):
        """Sobrescreve opções em memória (usado pela CLI e pelos testes)."""
        self.config.read_dict({section: {k: str(v) for k, v in values.items()}})

    def get(self, section, option, fallback=None):
        try:
            return self.config.get(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def getboolean(self, section, option, fallback=False):
        try:
            return self.config.getboolean(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getint(self, section, option, fallback=0):
        try:
            return self.config.getint(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback


# Instância global padrão para uso em outros módulos
config = RepoDepsConfig()
