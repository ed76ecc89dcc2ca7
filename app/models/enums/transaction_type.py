# app/models/enums/transaction_type.py
import enum


class TransactionType(str, enum.Enum):
    quotation = "quotation"
    rfp = "rfp"
