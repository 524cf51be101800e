from courier import Event


class InvoicePaid(Event):
    invoice_id: int
    amount: int
