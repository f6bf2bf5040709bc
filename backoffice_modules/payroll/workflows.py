"""Payroll Workflows.

State machine for simulated pay runs.  Nothing is persisted; the workflow
only decides which actions are legal and which guards the service checks.
"""

from backoffice_kernel.domain.workflow import Guard, Transition, Workflow
from backoffice_kernel.logging_config import get_logger
from backoffice_modules.payroll.models import PayRunState

logger = get_logger("modules.payroll.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

CONFIRMER_IDENTIFIED = Guard(
    name="confirmer_identified",
    description="The person confirming the pay run is named",
)

SUMMARY_UNCHANGED = Guard(
    name="summary_unchanged",
    description="Recomputed totals match the previewed totals",
)

logger.info(
    "payroll_workflow_guards_defined",
    extra={
        "guards": [
            CONFIRMER_IDENTIFIED.name,
            SUMMARY_UNCHANGED.name,
        ],
    },
)


# -----------------------------------------------------------------------------
# Pay Run Workflow
# -----------------------------------------------------------------------------

DRAFT = PayRunState.DRAFT.value
PREVIEWED = PayRunState.PREVIEWED.value
CONFIRMED = PayRunState.CONFIRMED.value

PAY_RUN_WORKFLOW = Workflow(
    name="pay_run",
    description="Payroll preview and confirmation lifecycle",
    initial_state=DRAFT,
    states=(DRAFT, PREVIEWED, CONFIRMED),
    transitions=(
        Transition(DRAFT, PREVIEWED, action="preview"),
        Transition(PREVIEWED, DRAFT, action="recalculate"),  # inputs changed
        Transition(PREVIEWED, CONFIRMED, action="confirm", guard=SUMMARY_UNCHANGED),
    ),
    terminal_states=(CONFIRMED,),
)

# Checked in this order by PayrollService.confirm_pay_run; a Transition carries one guard.
CONFIRM_GUARDS = (CONFIRMER_IDENTIFIED, SUMMARY_UNCHANGED)

logger.info(
    "pay_run_workflow_registered",
    extra={
        "workflow_name": PAY_RUN_WORKFLOW.name,
        "state_count": len(PAY_RUN_WORKFLOW.states),
        "transition_count": len(PAY_RUN_WORKFLOW.transitions),
    },
)
