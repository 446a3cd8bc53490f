"""Custom resource property and attribute names.

These are the contract with the provisioning layer; renaming any of them
changes what the stack reads back through ``Fn::GetAtt``.
"""

from __future__ import annotations

# Stateless, supplied on every event
PROP_STATE_MACHINE_ARN = "StateMachine"
PROP_LAST_CFN_UPDATE = "LastCfnUpdate"
PROP_START_TIME = "StartTime"
PROP_EXEC_INPUT = "ExecInput"

# Reported back in ``Data``
ATTR_LAST_EXECUTION_START_TIME = "ActualStartTime"
ATTR_CURRENT_STATUS = "CurrentStatus"
ATTR_TASK_STATES = "AttrTaskStates"
ATTR_LAST_EXECUTION_ARN = "LastExecutionArn"
