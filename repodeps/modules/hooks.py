# repodeps/modules/hooks.py
import os
import subprocess
from typing import Optional

from repodeps.modules import logger
from repodeps.modules.manifest import Manifest


class HookManager:
    """
    Executa os hooks de build de um projeto.
    - Hooks vêm da seção 'hooks' do repodeps.yaml, por stage (pre-build, post-build).
    - Cada hook é um comando shell executado no diretório do projeto,
      com REPODEPS_PROJECT_DIR no ambiente.
    """

    def __init__(self, dry_run: bool = False, shell: Optional[str] = None):
        self.log = logger.Logger("hooks")
        self.dry_run = dry_run
        self.shell = shell

    def run_hooks(self, stage: str, manifest: Manifest, directory: str):
        """
        Executa os hooks do projeto de uma etapa, em ordem.
        Propaga a primeira falha (CalledProcessError).
        """
        commands = manifest.hooks.get(stage, [])
        if not commands:
            return
        self.log.info(f"Executando hooks para stage={stage} ({manifest.name or directory})")
        for command in commands:
            self._execute_command(command, directory)

    def _execute_command(self, command: str, directory: str):
        self.log.info(f"Executando comando hook: {command}")

        if self.dry_run:
            self.log.info(f"[DRY-RUN] Não executado: {command}")
            return

        env = os.environ.copy()
        env["REPODEPS_PROJECT_DIR"] = directory

        try:
            subprocess.run(command, shell=True, check=True, cwd=directory, env=env, executable=self.shell)
        except subprocess.CalledProcessError as e:
            self.log.error(f"Erro ao executar hook '{command}': {e}")
            raise
