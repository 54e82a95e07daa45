"""
Intrinsic function helpers.

Every cross-reference in the generated template is a plain logical name
wrapped in one of these shapes, which is how the provisioning engine
resolves them.
"""

from typing import Any, Dict, List

STACK_NAME = "AWS::StackName"
REGION = "AWS::Region"
PARTITION = "AWS::Partition"
ACCOUNT_ID = "AWS::AccountId"


def ref(name: str) -> Dict[str, str]:
    return {"Ref": name}


def get_att(name: str, attribute: str) -> Dict[str, List[str]]:
    return {"Fn::GetAtt": [name, attribute]}


def sub(template: str) -> Dict[str, str]:
    return {"Fn::Sub": template}


def join(delimiter: str, values: List[Any]) -> Dict[str, list]:
    return {"Fn::Join": [delimiter, list(values)]}


def select(index: int, values: Any) -> Dict[str, list]:
    return {"Fn::Select": [str(index), values]}


def base64(value: Any) -> Dict[str, Any]:
    return {"Fn::Base64": value}


def stack_name_join(suffix: str) -> Dict[str, list]:
    """``<stack name>-<suffix>``"""
    return join("-", [ref(STACK_NAME), suffix])


def tag(key: str, value: Any) -> Dict[str, Any]:
    return {"Key": key, "Value": value}


def name_tag(value: Any) -> Dict[str, Any]:
    return tag("Name", value)


def stack_name_tag(suffix: str) -> Dict[str, Any]:
    """Name tag of the form ``${AWS::StackName}-<suffix>``."""
    return name_tag(sub(f"${{{STACK_NAME}}}-{suffix}"))
