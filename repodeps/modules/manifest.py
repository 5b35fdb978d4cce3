# repodeps/modules/manifest.py
"""
Manifest manager - carregar, validar, criar e editar repodeps.yaml

Uso:
  - Programaticamente: from repodeps.modules.manifest import ManifestManager
  - CLI: repodeps init / repodeps config
"""

from __future__ import annotations
import os
from typing import List, Dict, Optional, Any, Tuple

import yaml

from repodeps.modules import logger as _logger
from repodeps.modules.returncode import ReturnCode
from repodeps.modules.utils import Utils

MANIFEST_FILE = "repodeps.yaml"
DEFAULT_BRANCH = "main"


class ManifestError(Exception):
    pass


class Dependency:
    """Uma aresta declarada: onde fica o checkout, de onde clonar e qual branch."""

    def __init__(self, name: str, directory: str, url: str, branch: str = DEFAULT_BRANCH):
        self.name = name
        self.directory = directory
        self.url = url
        self.branch = branch or DEFAULT_BRANCH

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dependency":
        directory = data["directory"]
        name = data.get("name") or os.path.basename(os.path.normpath(directory))
        return cls(name, directory, data["url"], data.get("branch") or DEFAULT_BRANCH)

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "directory": self.directory,
            "url": self.url,
            "branch": self.branch,
        }

    def __eq__(self, other):
        if not isinstance(other, Dependency):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Dependency({self.name!r}, {self.directory!r}, {self.url!r}, {self.branch!r})"


class Manifest:
    def __init__(self,
                 name: str = "",
                 build_script: str = "",
                 packages_dir: str = "artifacts",
                 packages_pattern: str = "*.tar.gz",
                 update_command: str = "",
                 hooks: Optional[Dict[str, List[str]]] = None,
                 dependencies: Optional[List[Dependency]] = None):
        self.name = name
        self.build_script = build_script
        self.packages_dir = packages_dir
        self.packages_pattern = packages_pattern
        self.update_command = update_command
        self.hooks = hooks or {}
        self.dependencies = dependencies or []

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        build = data.get("build") or {}
        packages = data.get("packages") or {}
        update = data.get("update") or {}
        return cls(
            name=data.get("name") or "",
            build_script=build.get("script") or "",
            packages_dir=packages.get("directory") or "artifacts",
            packages_pattern=packages.get("pattern") or "*.tar.gz",
            update_command=update.get("command") or "",
            hooks={stage: list(cmds or []) for stage, cmds in (data.get("hooks") or {}).items()},
            dependencies=[Dependency.from_dict(d) for d in data.get("dependencies") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "build": {"script": self.build_script},
            "packages": {"directory": self.packages_dir, "pattern": self.packages_pattern},
            "update": {"command": self.update_command},
            "hooks": self.hooks,
            "dependencies": [d.to_dict() for d in self.dependencies],
        }


class ManifestManager:
    def __init__(self, logger: Optional[_logger.Logger] = None):
        self.log = logger or _logger.Logger("manifest")

    # -------------------------
    # Localização
    # -------------------------
    @staticmethod
    def manifest_path(directory: str) -> str:
        return os.path.join(directory, MANIFEST_FILE)

    def find_project_root(self, directory: str) -> Optional[str]:
        """
        Sobe a partir de directory até achar um repodeps.yaml.

        Para na raiz do repositório git (diretório com .git), de modo que um
        subdiretório de um projeto resolve para o próprio projeto e nunca para
        um projeto vizinho acima dele.
        """
        current = Utils.canonical_path(directory)
        while True:
            if os.path.isfile(self.manifest_path(current)):
                return current
            parent = os.path.dirname(current)
            if Utils.is_git_repository(current) or parent == current:
                return None
            current = parent

    # -------------------------
    # I/O
    # -------------------------
    def load(self, path: str) -> Manifest:
        """Carrega repodeps.yaml de um diretório ou de um arquivo específico"""
        path = os.path.abspath(path)
        candidate = self.manifest_path(path) if os.path.isdir(path) else path

        if not os.path.exists(candidate):
            raise ManifestError(f"Manifest file not found: {candidate}")

        try:
            with open(candidate, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ManifestError(f"Manifest {candidate} could not be read: {e}") from e

        self.validate(data)
        self.log.debug(f"Manifest carregado: {candidate}")
        return Manifest.from_dict(data)

    def load_from_directory(self, directory: str,
                            search_parents: bool = True) -> Tuple[Optional[Manifest], str, ReturnCode]:
        """
        Carrega o manifest do projeto que contém directory.

        Com search_parents=False só vale um repodeps.yaml no próprio directory.
        Nunca levanta exceção: devolve (manifest ou None, diretório canônico, código).
        """
        canonical = Utils.canonical_path(directory)
        if search_parents:
            root = self.find_project_root(canonical)
        else:
            root = canonical if os.path.isfile(self.manifest_path(canonical)) else None
        if root is None:
            self.log.debug(f"Nenhum {MANIFEST_FILE} encontrado a partir de {canonical}")
            return None, canonical, ReturnCode.MANIFEST_NOT_FOUND
        try:
            return self.load(root), root, ReturnCode.SUCCESS
        except ManifestError as e:
            self.log.error(str(e))
            return None, root, ReturnCode.INVALID_MANIFEST

    def save(self, manifest: Manifest, dest_dir: str) -> str:
        """Salva o manifest como repodeps.yaml no diretório destino"""
        data = manifest.to_dict()
        self.validate(data)
        dest_dir = os.path.abspath(dest_dir)
        Utils.ensure_dir(dest_dir)
        dest_file = self.manifest_path(dest_dir)
        with open(dest_file, "w", encoding="utf-8") as f:
            f.write(self.dump(manifest))
        self.log.info(f"Manifest salvo em: {dest_file}")
        return dest_file

    @staticmethod
    def dump(manifest: Manifest) -> str:
        return yaml.safe_dump(manifest.to_dict(), sort_keys=False, allow_unicode=True)

    # -------------------------
    # Criação / template
    # -------------------------
    def create(self,
               dest_dir: str,
               name: Optional[str] = None,
               build_script: str = "",
               packages_dir: str = "artifacts",
               dependencies: Optional[List[Dependency]] = None) -> str:
        """
        Cria um repodeps.yaml básico em dest_dir e devolve o caminho salvo.
        Levanta ManifestError se já existir um.
        """
        if os.path.exists(self.manifest_path(dest_dir)):
            raise ManifestError(f"Manifest already exists: {self.manifest_path(dest_dir)}")
        manifest = Manifest(
            name=name or os.path.basename(os.path.abspath(dest_dir)),
            build_script=build_script,
            packages_dir=packages_dir,
            dependencies=dependencies,
        )
        return self.save(manifest, dest_dir)

    # -------------------------
    # Validação
    # -------------------------
    def validate(self, data: Dict[str, Any]) -> bool:
        """Valida o formato do conteúdo bruto de um repodeps.yaml"""
        if not isinstance(data, dict):
            raise ManifestError("Manifest must be a mapping")

        for section in ("build", "packages", "update", "hooks"):
            if data.get(section) is not None and not isinstance(data[section], dict):
                raise ManifestError(f"Campo '{section}' deve ser um dicionário")

        self._check_strings(data, ("name",), "manifest")
        self._check_strings(data.get("build") or {}, ("script",), "build")
        self._check_strings(data.get("packages") or {}, ("directory", "pattern"), "packages")
        self._check_strings(data.get("update") or {}, ("command",), "update")

        for stage, cmds in (data.get("hooks") or {}).items():
            if cmds is not None and not isinstance(cmds, list):
                raise ManifestError(f"Hooks do stage '{stage}' devem ser uma lista")
            if any(not isinstance(cmd, str) for cmd in cmds or []):
                raise ManifestError(f"Hooks do stage '{stage}' devem ser comandos (strings)")

        deps = data.get("dependencies")
        if deps is None:
            return True
        if not isinstance(deps, list):
            raise ManifestError("Campo 'dependencies' deve ser uma lista")
        for idx, dep in enumerate(deps):
            if not isinstance(dep, dict):
                raise ManifestError(f"Dependência #{idx} deve ser um dicionário")
            missing = [f for f in ("directory", "url") if not dep.get(f)]
            if missing:
                raise ManifestError(f"Dependência #{idx}: campos obrigatórios faltando: {missing}")
            self._check_strings(dep, ("name", "directory", "url", "branch"), f"dependência #{idx}")
        return True

    @staticmethod
    def _check_strings(section: Dict[str, Any], fields, where: str):
        for field in fields:
            value = section.get(field)
            if value is not None and not isinstance(value, str):
                raise ManifestError(f"Campo '{field}' em {where} deve ser texto, não {type(value).__name__}")

    # -------------------------
    # Edição helpers
    # -------------------------
    def add_dependency(self, manifest: Manifest, dep: Dependency) -> Manifest:
        if any(d.directory == dep.directory for d in manifest.dependencies):
            self.log.debug(f"Dependência já existe: {dep.directory}")
            return manifest
        manifest.dependencies.append(dep)
        self.log.info(f"Dependência adicionada: {dep.name}")
        return manifest

    def remove_dependency(self, manifest: Manifest, name: str) -> Manifest:
        before = len(manifest.dependencies)
        manifest.dependencies = [d for d in manifest.dependencies if d.name != name]
        if len(manifest.dependencies) != before:
            self.log.info(f"Dependência removida: {name}")
        return manifest
