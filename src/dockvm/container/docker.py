"""Docker runtime controller.

Converges a lima guest and its macOS host to a requested docker lifecycle
state. Each operation probes the current state fresh, builds a new
:class:`~dockvm.container.chain.ActionChain` holding only the steps that are
still needed, and executes it. There is no stored state machine: re-running
any operation after a partial failure re-probes and picks up from reality.

Provision rule table:

.. code-block:: text

    probe                       steps appended (in order)
    ─────────────────────────   ──────────────────────────────────────────
    docker not installed        create socket symlink, install in guest
    user not in docker group    fix user permission, restart guest
    (always)                    create forwarding script (needs guest user),
                                install launch agent

Probe failures count as "condition not met". Action failures stop the chain
and are returned unchanged. ``version()`` never fails; it returns ``""``.

The guest itself is never cleaned up by ``teardown()``: the VM is deleted as a
whole by whoever tears the environment down, so only host-side configuration
is removed.

Example::

    runtime = DockerRuntime(HostShell(), GuestShell("dockvm", HostShell()))
    result = runtime.provision()
    if result.is_err():
        print(result.error)
"""

from __future__ import annotations

from dockvm.container.chain import ActionChain
from dockvm.container.forwarding import write_socket_forwarding_script
from dockvm.container.launchd import LaunchAgent
from dockvm.core.errors import CommandError
from dockvm.core.logging import get_logger
from dockvm.core.result import Ok, Result
from dockvm.core.settings import DockvmSettings, get_settings
from dockvm.environment.protocols import GuestActions, HostActions

logger = get_logger(__name__)

# LSB init script status code for "program is not running"
SERVICE_NOT_RUNNING = 3

INSTALLED_PROBE = ("command", "-v", "docker")
PERMISSION_PROBE = ("sh", "-c", r'getent group docker | grep "\b${USER}\b"')
STATUS_PROBE = ("service", "docker", "status")

INSTALL_COMMAND = ("sh", "-c", "curl -fsSL https://get.docker.com | sh")
FIX_PERMISSION_COMMAND = ("sh", "-c", 'sudo usermod -aG docker "$USER"')
START_COMMAND = ("sudo", "service", "docker", "start")
STOP_COMMAND = ("sudo", "service", "docker", "stop")


class DockerRuntime:
    """Docker inside the guest, socket forwarded to the host by launchd."""

    NAME = "docker"
    DEPENDENCIES = ("docker",)
    VERSION_FORMAT = 'client: v{{.Client.Version}}{{printf "\\n"}}server: v{{.Server.Version}}'

    def __init__(
        self,
        host: HostActions,
        guest: GuestActions,
        settings: DockvmSettings | None = None,
    ) -> None:
        self.host = host
        self.guest = guest
        self.settings = settings or get_settings()
        self.launchd = LaunchAgent.for_runtime(self.NAME, host, self.settings)

    @property
    def name(self) -> str:
        return self.NAME

    def new_chain(self) -> ActionChain:
        return ActionChain(self.NAME)

    # ------------------------------------------------------------------
    # Probes
    # ------------------------------------------------------------------

    def is_installed(self) -> bool:
        installed = self.guest.run(list(INSTALLED_PROBE)).is_ok()
        logger.debug("probe.result", probe="installed", value=installed)
        return installed

    def is_user_permission_fixed(self) -> bool:
        fixed = self.guest.run(list(PERMISSION_PROBE)).is_ok()
        logger.debug("probe.result", probe="user_permission", value=fixed)
        return fixed

    def is_service_stopped(self) -> bool:
        """True only when the guest definitely reports docker as not running."""
        result = self.guest.run(list(STATUS_PROBE))
        stopped = (
            result.is_err()
            and isinstance(result.error, CommandError)
            and result.error.exit_code == SERVICE_NOT_RUNNING
        )
        logger.debug("probe.result", probe="service_stopped", value=stopped)
        return stopped

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def setup_socket_symlink(self) -> Result[None]:
        return self.host.run(
            ["sudo", "ln", "-sf", str(self.settings.host_socket), str(self.settings.system_socket)]
        )

    def setup_in_vm(self) -> Result[None]:
        return self.guest.run(list(INSTALL_COMMAND))

    def fix_user_permission(self) -> Result[None]:
        return self.guest.run(list(FIX_PERMISSION_COMMAND))

    def create_socket_forwarding_script(self) -> Result[None]:
        # no file is written when the guest user cannot be resolved
        return (
            self.guest.user()
            .flat_map(lambda user: write_socket_forwarding_script(user, self.settings))
            .map(lambda _: None)
        )

    def create_launch_agent(self) -> Result[None]:
        return self.launchd.install(self.settings.forwarding_script)

    def start_service(self) -> Result[None]:
        return self.guest.run(list(START_COMMAND))

    def stop_service(self) -> Result[None]:
        if self.is_service_stopped():
            return Ok(None)
        return self.guest.run(list(STOP_COMMAND))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def provision(self) -> Result[None]:
        chain = self.new_chain().stage("provisioning")

        if not self.is_installed():
            chain.stage("setting up socket").add(self.setup_socket_symlink)
            chain.stage("provisioning in VM").add(self.setup_in_vm)

        if not self.is_user_permission_fixed():
            chain.add(self.fix_user_permission)
            chain.stage("restarting VM to complete setup").add(self.guest.restart)

        chain.stage("configuring host")
        chain.add(self.create_socket_forwarding_script)
        chain.add(self.create_launch_agent)

        return chain.execute()

    def start(self) -> Result[None]:
        chain = self.new_chain().stage("starting")
        # guest daemon first: the agent forwards its socket
        chain.add(self.start_service)
        chain.add(self.launchd.load)
        return chain.execute()

    def stop(self) -> Result[None]:
        chain = self.new_chain().stage("stopping")
        chain.add(self.stop_service)
        chain.add(self.launchd.unload)
        return chain.execute()

    def teardown(self) -> Result[None]:
        chain = self.new_chain().stage("deleting")
        if self.launchd.exists():
            chain.add(self.launchd.unload)
            chain.add(self.launchd.remove)
        return chain.execute()

    def dependencies(self) -> list[str]:
        return list(self.DEPENDENCIES)

    def version(self) -> str:
        result = self.host.run_output(["docker", "version", "--format", self.VERSION_FORMAT])
        if result.is_err():
            logger.debug("version.unavailable", runtime=self.NAME, error=str(result.error))
        return result.unwrap_or("")

    def __repr__(self) -> str:
        return f"DockerRuntime(app={self.settings.app_name!r})"
