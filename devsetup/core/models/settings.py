"""
ProvisionSettings — user-tunable values behind the installation steps.

Every field has a default, so an empty or absent config file reproduces
the stock workstation. Paths without a leading ``/`` are relative to the
user's home directory.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from devsetup.core.models.platform import PlatformId

DEFAULT_THEME_CONTENT = """\
PROMPT="%{$fg[green]%}%n%{$fg_bold[white]%}@%{$fg_bold[green]%}%m %(?:%{$fg_bold[green]%}%1{➜%} :%{$fg_bold[red]%}%1{💀%} ) %{$fg[cyan]%}%c%{$reset_color%}"
PROMPT+=' $(git_prompt_info)'

ZSH_THEME_GIT_PROMPT_PREFIX="%{$fg_bold[blue]%}git:(%{$fg[red]%}"
ZSH_THEME_GIT_PROMPT_SUFFIX="%{$reset_color%} "
ZSH_THEME_GIT_PROMPT_DIRTY="%{$fg[blue]%}) %{$fg[yellow]%}%1{✗%}"
ZSH_THEME_GIT_PROMPT_CLEAN="%{$fg[blue]%})"
"""


class ProvisionSettings(BaseModel):
    """Values consumed by the step table."""

    # ── Version control identity ─────────────────────────────────
    git_name: str = "Mani Tofigh"
    git_email: str = "manitofigh@protonmail.com"

    # ── Editor build ─────────────────────────────────────────────
    editor_version: str = "0.10.0"
    editor_archive_url: str = (
        "https://github.com/neovim/neovim/archive/refs/tags/v{version}.tar.gz"
    )
    editor_source_dir: str = "neovim-{version}"   # top-level dir inside the archive
    editor_config_repo: str = "https://github.com/manitofigh/nvim.git"
    editor_config_dir: str = ".config/nvim"
    build_dir: str | None = None                   # None: system temp dir

    # ── Shell ────────────────────────────────────────────────────
    login_shell: str = "zsh"
    shell_rc: str = ".zshrc"
    scripts_dir: str = "scripts"
    shell_framework_installer: str = (
        "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
    )
    shell_framework_dir: str = ".oh-my-zsh"
    shell_theme: str = "robbyrussell"
    shell_theme_content: str = DEFAULT_THEME_CONTENT

    # ── Packages ─────────────────────────────────────────────────
    extra_packages: dict[PlatformId, list[str]] = Field(default_factory=dict)

    @field_validator("editor_version")
    @classmethod
    def _strip_v_prefix(cls, value: str) -> str:
        # Accept "v0.10.0" as well as "0.10.0"
        return value[1:] if value.startswith("v") else value

    @field_validator("editor_archive_url", "editor_source_dir")
    @classmethod
    def _version_template(cls, value: str) -> str:
        # {version} is the only placeholder these templates get
        try:
            value.format(version="0")
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ValueError(f"{value!r} may only use the {{version}} placeholder ({e!r})") from e
        return value

    @property
    def editor_archive(self) -> str:
        return self.editor_archive_url.format(version=self.editor_version)

    @property
    def editor_archive_name(self) -> str:
        return self.editor_archive.rsplit("/", 1)[-1]

    @property
    def editor_source_name(self) -> str:
        return self.editor_source_dir.format(version=self.editor_version)
