"""
Data models for the nft-transfer tool.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

class TransferNft(BaseModel):
    """Body of a cw721 transfer_nft execute message"""
    recipient: str
    token_id: str

class TransferMsg(BaseModel):
    """cw721 execute message wrapping transfer_nft"""
    transfer_nft: TransferNft

class TransferInstruction(BaseModel):
    """One contract execute message of a batch transfer"""
    contract_address: str = Field(..., alias="contractAddress")
    msg: TransferMsg

    class Config:
        populate_by_name = True
        frozen = True

    def execute_msg(self) -> Dict[str, Any]:
        """JSON payload sent to the contract"""
        return self.msg.model_dump()

class EventAttribute(BaseModel):
    key: str
    value: str

    class Config:
        frozen = True

class TxEvent(BaseModel):
    """Event emitted while executing a transaction"""
    type: str
    attributes: Optional[List[EventAttribute]] = None

    class Config:
        frozen = True

class TransactionResult(BaseModel):
    """Result of an included transaction"""
    transaction_hash: str = Field(..., alias="transactionHash")
    height: int = 0
    gas_used: int = Field(0, alias="gasUsed")
    events: List[TxEvent] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        frozen = True
