from stack_init.deploy_workflow import WorkflowError, dump_workflow, load_workflow, remove_typecheck_job
from stack_init.errors import StackInitError
from stack_init.fly_toml import FlyTomlError, patch_fly_toml
from stack_init.naming import PLACEHOLDER, generate_app_name, random_suffix, sanitize_app_name
from stack_init.orchestrator import completion_message, customize, run
from stack_init.package_json import PackageJson, PackageJsonError, update_package_json
from stack_init.package_manager import (
    PACKAGE_MANAGERS,
    PackageManagerError,
    PackageManagerProfile,
    detect_package_manager,
    get_package_manager_profile,
    run_script,
)
from stack_init.text_patches import add_lockfile_to_dockerfile, replace_placeholder, use_js_test_setup

__all__ = [
    "PACKAGE_MANAGERS",
    "PLACEHOLDER",
    "FlyTomlError",
    "PackageJson",
    "PackageJsonError",
    "PackageManagerError",
    "PackageManagerProfile",
    "StackInitError",
    "WorkflowError",
    "add_lockfile_to_dockerfile",
    "completion_message",
    "customize",
    "detect_package_manager",
    "dump_workflow",
    "generate_app_name",
    "get_package_manager_profile",
    "load_workflow",
    "patch_fly_toml",
    "random_suffix",
    "remove_typecheck_job",
    "replace_placeholder",
    "run",
    "run_script",
    "sanitize_app_name",
    "update_package_json",
    "use_js_test_setup",
]
