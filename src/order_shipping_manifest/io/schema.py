# src/order_shipping_manifest/io/schema.py
from __future__ import annotations

# Byte-order markers prefixed to every export
UTF8_BOM_TEXT = "\ufeff"
UTF8_BOM_BYTES = b"\xef\xbb\xbf"

# Fixed download names expected by the carrier portals / accounting
YAMATO_FILENAME = "yamato_orders.csv"
SEINO_FILENAME = "seino_orders.xlsx"
SETTLEMENT_FILENAME = "b2b_affiliate_orders.csv"
CUSTOMER_FILENAME = "customers-data.csv"

CSV_MEDIA_TYPE = "text/csv;charset=utf-8;"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet;charset=utf-8;"

YAMATO_COLUMN_COUNT = 95
SEINO_COLUMN_COUNT = 34

# Shipper (ご依頼主) block printed on every manifest
SHIPPER_NAME = "株式会社ECC"
SHIPPER_PHONE = "06-6352-0156"
SHIPPER_PHONE_DIGITS = "0663520156"
SHIPPER_ZIP = "5300044"
SHIPPER_ADDRESS = "大阪府大阪市北区東天満1-10-20"
SHIPPER_BUILDING = "ECC本社ビル4F"
SHIPPER_ITEM_NAME = "化粧品"
YAMATO_BILLING_CUSTOMER_CODE = "0663520156"
YAMATO_FREIGHT_MANAGEMENT_NO = "01"

SEINO_SHIPPER_NAME = "株式会社 ECC"
SEINO_SHIPPER_ADDRESS = "大阪府 大阪市北区 東天満 1-10-20"
SEINO_REFERENCE_PREFIX = "ECC"
SEINO_REFERENCE_DIGITS = 17
SEINO_PACKAGE_COUNT = "1"

# Yamato B2 cloud import layout (header row, in order)
YAMATO_HEADERS: tuple[str, ...] = (
    "お客様管理番号",
    "送り状種類",
    "クール区分",
    "伝票番号",
    "出荷予定日",
    "お届け予定日",
    "配達時間帯",
    "お届け先コード",
    "お届け先電話番号",
    "お届け先電話番号枝番",
    "お届け先郵便番号",
    "お届け先住所",
    "お届け先アパートマンション名",
    "お届け先会社・部門１",
    "お届け先会社・部門２",
    "お届け先名",
    "お届け先名(ｶﾅ)",
    "敬称",
    "ご依頼主コード",
    "ご依頼主電話番号",
    "ご依頼主電話番号枝番",
    "ご依頼主郵便番号",
    "ご依頼主住所",
    "ご依頼主アパートマンション名",
    "ご依頼主名",
    "ご依頼主名(カナ)",
    "品目コード１",
    "品名１",
    "品名２",
    "荷扱い1",
    "荷扱い2",
    "記事",
    "ｺﾚｸﾄ代金引換額（税込)",
    "内消費税額等",
    "止置き",
    "営業所コード",
    "発行枚数",
    "個数口表示フラグ",
    "請求先顧客コード",
    "請求先分類コード",
    "運賃管理番号",
    "クロネコwebコレクトデータ登録",
    "クロネコwebコレクト加盟店番号",
    "クロネコwebコレクト申込受付番号１",
    "クロネコwebコレクト申込受付番号２",
    "クロネコwebコレクト申込受付番号３",
    "お届け予定ｅメール利用区分",
    "お届け予定ｅメールe-mailアドレス",
    "入力機種",
    "お届け予定ｅメールメッセージ",
    "お届け完了ｅメール利用区分",
    "お届け完了ｅメールe-mailアドレス",
    "お届け完了ｅメールメッセージ",
    "クロネコ収納代行利用区分",
    "予備",
    "収納代行請求金額(税込)",
    "収納代行内消費税額等",
    "収納代行請求先郵便番号",
    "収納代行請求先住所",
    "収納代行請求先住所（アパートマンション名）",
    "収納代行請求先会社・部門名１",
    "収納代行請求先会社・部門名２",
    "収納代行請求先名(漢字)",
    "収納代行請求先名(カナ)",
    "収納代行問合せ先名(漢字)",
    "収納代行問合せ先郵便番号",
    "収納代行問合せ先住所",
    "収納代行問合せ先住所（アパートマンション名）",
    "収納代行問合せ先電話番号",
    "収納代行管理番号",
    "収納代行品名",
    "収納代行備考",
    "複数口くくりキー",
    "検索キータイトル1",
    "検索キー1",
    "検索キータイトル2",
    "検索キー2",
    "検索キータイトル3",
    "検索キー3",
    "検索キータイトル4",
    "検索キー4",
    "検索キータイトル5",
    "検索キー5",
    "予備",
    "予備",
    "投函予定メール利用区分",
    "投函予定メールe-mailアドレス",
    "投函予定メールメッセージ",
    "予備",
    "投函完了メール（お届け先宛）利用区分",
    "投函完了メール（お届け先宛）e-mailアドレス",
    "投函完了メール（お届け先宛）メールメッセージ",
    "投函完了メール（ご依頼主宛）利用区分",
    "投函完了メール（ご依頼主宛）e-mailアドレス",
    "投函完了メール（ご依頼主宛）メールメッセージ",
)

SETTLEMENT_HEADERS: tuple[str, ...] = (
    "注文日",
    "お名前",
    "メールアドレス",
    "注文タグ",
    "合計商品金額",
    "注文商品",
)
SETTLEMENT_TOTAL_LABEL = "合計金額"
SETTLEMENT_COMMISSION_LABEL = "お支払い金額({percentage}%)"

CUSTOMER_HEADERS: tuple[str, ...] = (
    "ID",
    "タグ",
    "お名前",
    "メールアドレス",
    "電話番号",
    "郵便番号",
    "都道府県",
    "市区町村",
    "住所1",
    "住所2",
)

# Tag written on affiliate orders once their commission has been paid out
COMMISSION_PAID_TAG = "コミッション支払い済み"
