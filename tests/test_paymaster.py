"""
Tests for the paymaster build/sign/execute flow.
"""
from types import SimpleNamespace

import pytest
from unittest.mock import MagicMock

from avnu_sdk.exceptions import ConfigurationError, PaymasterStateError
from avnu_sdk.interfaces import PaymasterOptions
from avnu_sdk.models import Call, SignedPaymasterTransaction
from avnu_sdk.paymaster import (
    PaymasterFlow, PaymasterFlowState, PaymasterStep, build_paymaster_transaction, calls_to_wire,
    execute_all_paymaster_flow, execute_paymaster_transaction, normalize_signature, sign_paymaster_transaction
)

from conftest import TEST_ACCOUNT_ADDRESS

CALLS = [Call(contract_address="0x0222", entrypoint="stake", calldata=["0x0a"])]
WIRE_CALLS = [{"contractAddress": "0x0222", "entrypoint": "stake", "calldata": ["0x0a"]}]


class TestNormalizeSignature:
    """Test canonical signature form."""

    def test_sequence(self):
        assert normalize_signature([1, "0x0a", "255"]) == ["0x01", "0x0a", "0xff"]

    def test_tuple(self):
        assert normalize_signature((0x1234, 0x5678)) == ["0x1234", "0x5678"]

    def test_rs_dict_matches_sequence(self):
        assert normalize_signature({"r": 10, "s": "0x0b"}) == normalize_signature([10, 11])

    def test_rs_object(self):
        assert normalize_signature(SimpleNamespace(r=1, s=2)) == ["0x01", "0x02"]

    def test_idempotent(self):
        canonical = normalize_signature([7, 300])
        assert normalize_signature(canonical) == canonical

    @pytest.mark.parametrize("raw", [{"r": 1}, "0x01,0x02", 12])
    def test_unsupported_shapes(self, raw):
        with pytest.raises(ValueError):
            normalize_signature(raw)


def test_calls_to_wire_accepts_models_and_dicts():
    assert calls_to_wire(CALLS + WIRE_CALLS) == WIRE_CALLS + WIRE_CALLS


class TestSteps:
    """Test the individual steps."""

    def test_build(self, paymaster, paymaster_provider):
        typed_data = build_paymaster_transaction(TEST_ACCOUNT_ADDRESS, paymaster, CALLS)

        assert typed_data == {"primaryType": "OutsideExecution"}
        paymaster_provider.build_transaction.assert_called_once_with(
            {"type": "invoke", "invoke": {"userAddress": TEST_ACCOUNT_ADDRESS, "calls": WIRE_CALLS}},
            paymaster.params,
        )

    def test_build_accepts_object_result(self, paymaster, paymaster_provider):
        paymaster_provider.build_transaction.return_value = SimpleNamespace(typed_data={"t": 1})
        assert build_paymaster_transaction(TEST_ACCOUNT_ADDRESS, paymaster, CALLS) == {"t": 1}

    def test_build_requires_provider(self):
        with pytest.raises(ConfigurationError):
            build_paymaster_transaction(TEST_ACCOUNT_ADDRESS, PaymasterOptions(provider=None), CALLS)

    def test_build_result_without_typed_data(self, paymaster, paymaster_provider):
        paymaster_provider.build_transaction.return_value = {"fee": {}}
        with pytest.raises(KeyError):
            build_paymaster_transaction(TEST_ACCOUNT_ADDRESS, paymaster, CALLS)

    def test_sign(self, account):
        account.sign_message.return_value = {"r": 1, "s": 2}

        signed = sign_paymaster_transaction(account, {"t": 1})

        assert signed == SignedPaymasterTransaction(typed_data={"t": 1}, signature=["0x01", "0x02"])
        account.sign_message.assert_called_once_with({"t": 1})

    def test_execute(self, paymaster, paymaster_provider):
        signed = SignedPaymasterTransaction(typed_data={"t": 1}, signature=["0x01", "0x02"])

        result = execute_paymaster_transaction(TEST_ACCOUNT_ADDRESS, paymaster, signed)

        assert result.transaction_hash == "0x0def"
        paymaster_provider.execute_transaction.assert_called_once_with(
            {"type": "invoke", "invoke": {
                "userAddress": TEST_ACCOUNT_ADDRESS, "typedData": {"t": 1}, "signature": ["0x01", "0x02"],
            }},
            paymaster.params,
        )

    def test_execute_requires_provider(self):
        signed = SignedPaymasterTransaction(typed_data={"t": 1}, signature=["0x01", "0x02"])
        with pytest.raises(ConfigurationError):
            execute_paymaster_transaction(TEST_ACCOUNT_ADDRESS, PaymasterOptions(provider=None), signed)


class TestRunAll:
    """Test the combined flow."""

    def test_success(self, account, paymaster, paymaster_provider):
        result = execute_all_paymaster_flow(account, paymaster, CALLS)

        assert result.transaction_hash == "0x0def"
        account.sign_message.assert_called_once_with({"primaryType": "OutsideExecution"})
        invoke = paymaster_provider.execute_transaction.call_args[0][0]
        assert invoke["invoke"]["signature"] == ["0x1234", "0x5678"]
        account.execute.assert_not_called()

    def test_build_failure_stops_flow(self, account, paymaster, paymaster_provider):
        error = RuntimeError("paymaster unavailable")
        paymaster_provider.build_transaction.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            execute_all_paymaster_flow(account, paymaster, CALLS)

        assert exc_info.value is error
        account.sign_message.assert_not_called()
        paymaster_provider.execute_transaction.assert_not_called()

    def test_sign_failure_stops_flow(self, account, paymaster, paymaster_provider):
        account.sign_message.side_effect = PermissionError("User rejected")

        with pytest.raises(PermissionError):
            execute_all_paymaster_flow(account, paymaster, CALLS)

        paymaster_provider.execute_transaction.assert_not_called()


class TestPaymasterFlow:
    """Test the stateful flow and step tracking."""

    def test_states(self, account, paymaster):
        flow = PaymasterFlow(account, paymaster)
        assert flow.state == PaymasterFlowState.PENDING

        flow.build(CALLS)
        assert flow.state == PaymasterFlowState.BUILT
        flow.sign()
        assert flow.state == PaymasterFlowState.SIGNED
        result = flow.execute()

        assert flow.state == PaymasterFlowState.EXECUTED
        assert flow.result is result
        assert flow.failed_step is None

    @pytest.mark.parametrize("step, collaborator, method", [
        (PaymasterStep.BUILD, "paymaster_provider", "build_transaction"),
        (PaymasterStep.SIGN, "account", "sign_message"),
        (PaymasterStep.EXECUTE, "paymaster_provider", "execute_transaction"),
    ])
    def test_failed_step_recorded(self, request, account, paymaster, step, collaborator, method):
        error = RuntimeError(f"{step.value} failed")
        getattr(request.getfixturevalue(collaborator), method).side_effect = error
        flow = PaymasterFlow(account, paymaster)

        with pytest.raises(RuntimeError) as exc_info:
            flow.run_all(CALLS)

        assert exc_info.value is error
        assert flow.state == PaymasterFlowState.FAILED
        assert flow.failed_step == step

    def test_sign_before_build(self, account, paymaster):
        flow = PaymasterFlow(account, paymaster)

        with pytest.raises(PaymasterStateError) as exc_info:
            flow.sign()

        assert exc_info.value.state == PaymasterFlowState.PENDING
        account.sign_message.assert_not_called()

    def test_execute_before_sign(self, account, paymaster, paymaster_provider):
        flow = PaymasterFlow(account, paymaster)
        flow.build(CALLS)

        with pytest.raises(PaymasterStateError):
            flow.execute()

        paymaster_provider.execute_transaction.assert_not_called()

    def test_no_rerun_after_failure(self, account, paymaster, paymaster_provider):
        paymaster_provider.build_transaction.side_effect = RuntimeError("boom")
        flow = PaymasterFlow(account, paymaster)
        with pytest.raises(RuntimeError):
            flow.build(CALLS)

        with pytest.raises(PaymasterStateError):
            flow.build(CALLS)

    def test_failure_logged(self, account, paymaster, paymaster_provider):
        paymaster_provider.execute_transaction.side_effect = RuntimeError("relay rejected")
        logger = MagicMock()
        flow = PaymasterFlow(account, paymaster, logger=logger)

        with pytest.raises(RuntimeError):
            flow.run_all(CALLS)

        logger.warning.assert_called_once()
        assert "execute" in logger.warning.call_args[0][0]
