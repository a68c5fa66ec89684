from __future__ import annotations

from pathlib import Path

from conftest import MODULE_ENV_DUMP, RecordingRunner
from lmpmliap.config import recipe
from lmpmliap.environment import activate, create_venv, install_packages, load_modules, parse_env_dump
from lmpmliap.environment.modules import ENV_MARKER, module_script


def test_module_script_purges_before_loading():
    script = module_script(recipe.MODULES)
    assert script.startswith("module purge && module load gcc/11.2.0 openmpi/4.1.2")
    assert script.endswith("&& env -0")


def test_parse_env_dump_skips_shell_functions():
    env = parse_env_dump(MODULE_ENV_DUMP)
    assert env["CUDA_HOME"] == "/appl/spack/cuda-11.5.0"
    assert env["PATH"].startswith("/appl/spack/gcc-11.2.0/bin")
    assert not any(key.startswith("BASH_FUNC_") for key in env)


def test_parse_env_dump_keeps_equals_in_values():
    env = parse_env_dump("LMOD_OPTS=--a=b\0EMPTY=\0")
    assert env == {"LMOD_OPTS": "--a=b", "EMPTY": ""}


def test_load_modules_runs_login_shell_and_keeps_exports():
    runner = RecordingRunner()
    base = {"PATH": "/usr/bin", "TMPDIR": "/scratch", "PROJAPPL": "/projappl/p/u/LAMMPS-MLIAP"}
    env = load_modules(runner, recipe.MODULES, base)

    assert runner.calls[0]["cmd"][:2] == ["bash", "-lc"]
    assert "module load" in runner.calls[0]["cmd"][2]
    assert env["CUDA_HOME"] == "/appl/spack/cuda-11.5.0"
    assert env["TMPDIR"] == "/scratch"
    assert env["PROJAPPL"] == "/projappl/p/u/LAMMPS-MLIAP"


def test_load_modules_dry_run_returns_base_env():
    runner = RecordingRunner(env_dump="")
    base = {"PATH": "/usr/bin"}
    assert load_modules(runner, recipe.MODULES, base) == base


def test_activate_prepends_venv_bin(tmp_path):
    venv_dir = tmp_path / "venv"
    env = activate({"PATH": "/usr/bin", "PYTHONHOME": "/opt/python"}, venv_dir)

    assert env["PATH"].split(":")[0] == str(venv_dir / "bin")
    assert env["VIRTUAL_ENV"] == str(venv_dir)
    assert "PYTHONHOME" not in env


def test_activate_does_not_mutate_input(tmp_path):
    original = {"PATH": "/usr/bin"}
    activate(original, tmp_path / "venv")
    assert original == {"PATH": "/usr/bin"}


def test_venv_creation_and_pip_installs(tmp_path):
    runner = RecordingRunner()
    venv_dir = tmp_path / "venv"
    env = {"PATH": "/usr/bin"}

    create_venv(runner, venv_dir, env)
    install_packages(runner, venv_dir, activate(env, venv_dir),
                     recipe.PIP_BOOTSTRAP, recipe.PIP_PACKAGES)

    python = str(Path(venv_dir) / "bin" / "python")
    cmds = [call["cmd"] for call in runner.calls]
    assert cmds[0] == ["python3", "-m", "venv", str(venv_dir)]
    assert cmds[1] == [python, "-m", "pip", "install", "--upgrade", "pip", "wheel", "setuptools"]
    assert cmds[2][:4] == [python, "-m", "pip", "install"]
    assert cmds[2][4:] == recipe.PIP_PACKAGES
    # the venv is created by the module python, not the activated one
    assert runner.calls[0]["env"]["PATH"] == "/usr/bin"


def test_login_banner_before_marker_is_discarded():
    banner = "Welcome to Mahti!\nHOME=/bogus from motd\n"
    dump = f"{banner}\0{ENV_MARKER}\0CUDA_HOME=/appl/cuda\0PATH=/usr/bin\0"
    assert parse_env_dump(dump) == {"CUDA_HOME": "/appl/cuda", "PATH": "/usr/bin"}


def test_records_with_invalid_keys_are_skipped():
    dump = "Last login: Mon\nPATH=/usr/bin\0LANG=C\0"
    assert parse_env_dump(dump) == {"LANG": "C"}


def test_module_script_prints_marker_before_env():
    script = module_script(["gcc/11.2.0"])
    assert f"printf '\\0%s\\0' {ENV_MARKER} && env -0" in script


def test_load_modules_uses_step_label():
    runner = RecordingRunner()
    load_modules(runner, recipe.MODULES, {"PATH": "/usr/bin"})
    assert runner.calls[0]["label"] == "load modules"
