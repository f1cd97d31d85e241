from __future__ import annotations

from typing import List

from .rc_block import RcBlock

STARSHIP_SENTINEL = "starship init zsh"

_KUBECTL = r"""# Kubectl functions
alias k='kubectl'
kns() {
    if [ "$1" != "" ]; then
        kubectl config set-context --current --namespace="$1"
        echo -e "\e[1;32m Namespace set to $1\e[0m"
    else
        echo -e "\e[1;31m Error, please provide a valid Namespace!\e[0m"
    fi
}
knd() {
    kubectl config unset current-context
    echo -e "\e[1;32m Unset kubernetes current-context\e[0m"
}"""

_COLORMAP = r"""# Colormap
function colormap() {
    for i in {1..255}; do
        print -Px "${i} $(tput setaf $i)$1${2:-$(tput sgr0)}"
    done
}"""

_ALIASES = """# Aliases
alias grep='grep --color'
alias g='goto'"""

_EXA_ALIASES = """alias l='exa --icons --group-directories-first'
alias ll='exa --icons --group-directories-first -l'"""


def zsh_blocks(*, icon: str, with_exa: bool = True) -> List[RcBlock]:
    """Managed blocks for ~/.zshrc.

    Both carry the Starship sentinel so a hand-configured zshrc is left alone.
    """

    aliases = _ALIASES + ("\n" + _EXA_ALIASES if with_exa else "")
    prompt = "\n".join(
        [
            "# Distro icon for the Starship prompt (needs a Nerd Font)",
            f'export STARSHIP_DISTRO="{icon} "',
            "",
            "# Load Starship",
            'eval "$(starship init zsh)"',
        ]
    )
    return [
        RcBlock(name="helpers", body="\n\n".join([_KUBECTL, _COLORMAP, aliases]), sentinel=STARSHIP_SENTINEL),
        RcBlock(name="starship", body=prompt, sentinel=STARSHIP_SENTINEL),
    ]
