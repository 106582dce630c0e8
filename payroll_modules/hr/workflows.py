"""HR Workflows.

State machine for the payroll record lifecycle.
"""

from payroll_kernel.domain.principal import Role
from payroll_kernel.domain.workflow import Guard, Transition, Workflow
from payroll_kernel.logging_config import get_logger
from payroll_modules.hr.models import PaymentStatus

logger = get_logger("modules.hr.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

RECORD_BALANCED = Guard(
    name="record_balanced",
    description="gross = basic + overtime + bonuses and net = gross - tax - deductions",
)

PAYMENT_DATE_SET = Guard(
    name="payment_date_set",
    description="Payment date is recorded when the record is paid",
)


# -----------------------------------------------------------------------------
# Payroll Record Workflow
# -----------------------------------------------------------------------------

PENDING = PaymentStatus.PENDING.value
PROCESSED = PaymentStatus.PROCESSED.value
PAID = PaymentStatus.PAID.value

PAYROLL_RECORD_WORKFLOW = Workflow(
    name="payroll_record",
    description="Payroll record lifecycle: pending -> processed -> paid",
    initial_state=PENDING,
    states=(PENDING, PROCESSED, PAID),
    transitions=(
        Transition(PENDING, PROCESSED, action="process", guard=RECORD_BALANCED),
        Transition(PROCESSED, PAID, action="pay", guard=PAYMENT_DATE_SET),
        # Administrative reversal of a paid record
        Transition(PAID, PENDING, action="reverse", required_roles=(Role.ADMIN.value,)),
    ),
    terminal_states=(),
)

logger.info(
    "payroll_record_workflow_registered",
    extra={
        "workflow_name": PAYROLL_RECORD_WORKFLOW.name,
        "state_count": len(PAYROLL_RECORD_WORKFLOW.states),
        "transition_count": len(PAYROLL_RECORD_WORKFLOW.transitions),
    },
)
