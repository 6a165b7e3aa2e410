import pytest


CONTRACT_TEXT = """PURCHASE CONTRACT
Contract No: PO1234567
Amendment No: 2
Issue Date: 15.03.2024

BUYER NAME AND ADDRESS                          SELLER NAME AND ADDRESS
Acme Motors Inc                                 Widget Parts GmbH
100 Main Street                                 Industriestrasse 5
Detroit, MI 48201 USA                           80331 München

Payment Terms: Net 30
Part Number: 4471-AB
Currency: EUR
Base Price: 12.50 EUR
"""

GERMAN_TEXT = """Bestellung Nr: 4500123
Zahlungsbedingungen: 30 Tage netto
"""

XML_CONTRACT = """<?xml version="1.0" encoding="UTF-8"?>
<CONTRACT>
  <HEADER>
    <CONTRACT_NO>5500012345</CONTRACT_NO>
    <VER_NO>3</VER_NO>
    <ORDER_DATE>2024-02-01</ORDER_DATE>
    <SUPPLIER>123456789</SUPPLIER>
    <SUPPLIER_NAME>Widget Parts GmbH</SUPPLIER_NAME>
    <CURRENCY_HEAD>EUR</CURRENCY_HEAD>
    <PAYMENT_TERMS>Net 60</PAYMENT_TERMS>
    <INCOTERM>FCA</INCOTERM>
  </HEADER>
  <ITEM>
    <PRODUCT>7712345</PRODUCT>
    <DESCRIPTION>Bracket, front</DESCRIPTION>
    <NET_PRICE>4.25</NET_PRICE>
    <PRICE_UOM>PCE</PRICE_UOM>
    <DEMAND_LOCATION>0410</DEMAND_LOCATION>
    <DEMAND_LOCATION_DESC>Plant Spartanburg USA</DEMAND_LOCATION_DESC>
    <PRODUCT_LOCATION_DESC>Salonta</PRODUCT_LOCATION_DESC>
    <PURCHASER_NAME>Jane Doe</PURCHASER_NAME>
    <EMAIL>jane.doe@example.com</EMAIL>
  </ITEM>
</CONTRACT>
"""


@pytest.fixture
def contract_text():
    return CONTRACT_TEXT


@pytest.fixture
def german_text():
    return GERMAN_TEXT


@pytest.fixture
def xml_contract():
    return XML_CONTRACT
