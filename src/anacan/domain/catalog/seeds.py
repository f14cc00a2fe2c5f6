"""Demonstration content seeded into a freshly provisioned database.

Each seed set is a tuple of SeedRecords for one collection. Records are
matched against existing documents by their natural key and never
overwritten.
"""

from anacan.domain.entities.schema import PermissionRule
from anacan.domain.entities.seed import SeedRecord

# Document permissions for seeded content editable by signed-in users
EDITABLE_BY_USERS = (
    PermissionRule("read", "any"),
    PermissionRule("write", "users"),
    PermissionRule("delete", "users"),
)


def _category(slug: str, name_az: str, name_ru: str, icon: str, color: str) -> SeedRecord:
    return SeedRecord(
        collection_id="categories",
        key_fields=("slug",),
        data={"slug": slug, "name_az": name_az, "name_ru": name_ru, "icon": icon, "color": color},
    )


CATEGORIES = (
    _category("hamilelik", "Hamiləlik", "Беременность", "🤰", "bg-pink-100 text-pink-600"),
    _category("korpe", "Körpə", "Малыш", "👶", "bg-blue-100 text-blue-600"),
    _category("terbiye", "Tərbiyə", "Воспитание", "👨‍👩‍👧", "bg-green-100 text-green-600"),
    _category("saglamliq", "Sağlamlıq", "Здоровье", "🩺", "bg-red-100 text-red-600"),
    _category("ozune-qulluq", "Özünə Qulluq", "Уход за собой", "🧘‍♀️", "bg-purple-100 text-purple-600"),
    _category("qidalanma", "Qidalanma", "Питание", "🍎", "bg-orange-100 text-orange-600"),
    _category("xidmetler", "Xidmətlər", "Услуги", "🎁", "bg-yellow-100 text-yellow-600"),
    _category("oyuncaglar", "Oyuncaqlar", "Игрушки", "🧸", "bg-indigo-100 text-indigo-600"),
)


def _forum(
    order: int,
    slug: str,
    name: tuple[str, str],
    description: tuple[str, str],
    icon: str,
    color: str,
) -> SeedRecord:
    return SeedRecord(
        collection_id="forums",
        key_fields=("slug",),
        data={
            "slug": slug,
            "name_az": name[0],
            "name_ru": name[1],
            "description_az": description[0],
            "description_ru": description[1],
            "icon": icon,
            "color": color,
            "order": order,
            "is_active": True,
        },
        permissions=EDITABLE_BY_USERS,
    )


FORUMS = (
    _forum(
        1,
        "hamilelik",
        ("Hamiləlik", "Беременность"),
        (
            "Hamiləlik dövrü, doğum hazırlığı və hamiləlik məsləhətləri",
            "Период беременности, подготовка к родам и советы по беременности",
        ),
        "🤰",
        "#ec4899",
    ),
    _forum(
        2,
        "dogum-ve-sonrasi",
        ("Doğum və Sonrası", "Роды и после"),
        (
            "Doğum prosesi, doğumdan sonra bərpa və ilk günlər",
            "Процесс родов, восстановление после родов и первые дни",
        ),
        "👶",
        "#f59e0b",
    ),
    _forum(
        3,
        "usaq-terbiyesi",
        ("Uşaq Tərbiyəsi", "Воспитание детей"),
        (
            "Uşaqların tərbiyəsi, davranış problemləri və tərbiyə üsulları",
            "Воспитание детей, проблемы поведения и методы воспитания",
        ),
        "👨‍👩‍👧",
        "#10b981",
    ),
    _forum(
        4,
        "saglamliq-ve-qidalanma",
        ("Sağlamlıq və Qidalanma", "Здоровье и питание"),
        (
            "Uşaqların sağlamlığı, qidalanma və sağlam həyat tərzi",
            "Здоровье детей, питание и здоровый образ жизни",
        ),
        "💚",
        "#3b82f6",
    ),
    _forum(
        5,
        "tehsil-ve-inkisaf",
        ("Təhsil və İnkişaf", "Образование и развитие"),
        (
            "Uşaqların təhsili, inkişafı və öyrənmə prosesləri",
            "Образование детей, развитие и процессы обучения",
        ),
        "📚",
        "#8b5cf6",
    ),
    _forum(
        6,
        "aile-heyati",
        ("Ailə Həyatı", "Семейная жизнь"),
        (
            "Ailə münasibətləri, ailə problemləri və həll yolları",
            "Семейные отношения, семейные проблемы и решения",
        ),
        "❤️",
        "#ef4444",
    ),
    _forum(
        7,
        "geyim-ve-moda",
        ("Geyim və Moda", "Одежда и мода"),
        (
            "Hamiləlik və uşaq geyimləri, moda məsləhətləri",
            "Одежда для беременных и детей, советы по моде",
        ),
        "👗",
        "#ec4899",
    ),
    _forum(
        8,
        "eylence-ve-aktivlikler",
        ("Əyləncə və Aktivliklər", "Развлечения и активности"),
        (
            "Uşaqlarla əyləncə, oyunlar və aktivliklər",
            "Развлечения с детьми, игры и активности",
        ),
        "🎮",
        "#f59e0b",
    ),
)


def _ad_space(name: str, slug: str, description: str, position: str, width: int, height: int) -> SeedRecord:
    return SeedRecord(
        collection_id="ad_spaces",
        key_fields=("slug",),
        data={
            "name": name,
            "slug": slug,
            "description": description,
            "position": position,
            "width": width,
            "height": height,
            "is_active": True,
        },
        permissions=EDITABLE_BY_USERS,
    )


AD_SPACES = (
    _ad_space(
        "Header Top (Desktop)",
        "header-top-desktop",
        "Header bölümünün üstündə, navbar-dan əvvəl. Desktop üçün.",
        "header",
        728,
        90,
    ),
    _ad_space(
        "Header Bottom (Desktop)",
        "header-bottom-desktop",
        "Header bölümünün altında, navbar-dan sonra. Desktop üçün.",
        "header",
        728,
        90,
    ),
    _ad_space(
        "Hero Center",
        "hero-center",
        "Hero bölümünün mərkəzində, emoji yerində. Responsive.",
        "hero-center",
        400,
        300,
    ),
    _ad_space(
        "Sidebar Top (Desktop)",
        "sidebar-top-desktop",
        "Sidebar bölümünün üstündə. Desktop üçün.",
        "sidebar",
        300,
        250,
    ),
    _ad_space(
        "Sidebar Bottom (Desktop)",
        "sidebar-bottom-desktop",
        "Sidebar bölümünün altında. Desktop üçün.",
        "sidebar",
        300,
        250,
    ),
    _ad_space(
        "In-Content Top",
        "in-content-top",
        "Məzmunun ortasında, yuxarıda. Desktop üçün.",
        "in-content",
        728,
        90,
    ),
    _ad_space(
        "In-Content Middle",
        "in-content-middle",
        "Məzmunun ortasında, ortada. Desktop üçün.",
        "in-content",
        728,
        90,
    ),
    _ad_space("Footer Top", "footer-top", "Footer bölümünün üstündə. Desktop üçün.", "footer", 728, 90),
    _ad_space(
        "Footer Bottom", "footer-bottom", "Footer bölümünün altında. Desktop üçün.", "footer", 728, 90
    ),
    _ad_space(
        "Mobile Banner Top",
        "mobile-banner-top",
        "Mobil cihazlar üçün yuxarı banner. Yalnız mobil.",
        "mobile-banner",
        320,
        50,
    ),
    _ad_space(
        "Mobile Banner Bottom",
        "mobile-banner-bottom",
        "Mobil cihazlar üçün aşağı banner. Yalnız mobil.",
        "mobile-banner",
        320,
        50,
    ),
    _ad_space(
        "Native Article Top",
        "native-article-top",
        "Məqalə səhifəsində, məzmunun yuxarısında. Native format.",
        "native",
        300,
        250,
    ),
    _ad_space(
        "Native Article Middle",
        "native-article-middle",
        "Məqalə səhifəsində, məzmunun ortasında. Native format.",
        "native",
        300,
        250,
    ),
    _ad_space(
        "Native Sidebar",
        "native-sidebar",
        "Məqalə səhifəsində sidebar-da. Native format.",
        "native",
        300,
        250,
    ),
)


def _story(order: int, title: tuple[str, str], image_url: str, link_url: str, link_text: tuple[str, str]) -> SeedRecord:
    # Stories have no slug; the Azerbaijani title identifies them
    return SeedRecord(
        collection_id="stories",
        key_fields=("title_az",),
        data={
            "title_az": title[0],
            "title_ru": title[1],
            "image_url": image_url,
            "link_url": link_url,
            "link_text_az": link_text[0],
            "link_text_ru": link_text[1],
            "is_active": True,
            "order": order,
        },
    )


UNSPLASH = "https://images.unsplash.com/{}?w=1080&h=1920&fit=crop"

STORIES = (
    _story(
        1,
        ("Hamiləlik Məsləhətləri", "Советы по беременности"),
        UNSPLASH.format("photo-1555252333-9f8e92e65df9"),
        "/category/pregnancy",
        ("Daha çox", "Подробнее"),
    ),
    _story(
        2,
        ("Körpə Baxımı", "Уход за малышом"),
        UNSPLASH.format("photo-1555255707-c07966088b7b"),
        "/category/baby",
        ("Oxu", "Читать"),
    ),
    _story(
        3,
        ("Ana Sağlamlığı", "Здоровье мамы"),
        UNSPLASH.format("photo-1519494026892-80bbd2d6fd0d"),
        "/category/health",
        ("Kəşf et", "Исследовать"),
    ),
    _story(
        4,
        ("Tərbiyə Tövsiyələri", "Советы по воспитанию"),
        UNSPLASH.format("photo-1503454537195-1dcabb73ffb9"),
        "/category/parenting",
        ("Öyrən", "Узнать"),
    ),
    _story(
        5,
        ("Qidalanma Planı", "План питания"),
        UNSPLASH.format("photo-1490645935967-10de6ba17061"),
        "/category/nutrition",
        ("Bax", "Посмотреть"),
    ),
    _story(
        6,
        ("Özünə Qulluq", "Уход за собой"),
        UNSPLASH.format("photo-1506794778202-cad84cf45f1d"),
        "/category/selfcare",
        ("Daha çox", "Подробнее"),
    ),
    _story(
        7,
        ("Uşaq Tərbiyəsi", "Воспитание детей"),
        UNSPLASH.format("photo-1516627145497-ae6968895b74"),
        "/category/education",
        ("Oxu", "Читать"),
    ),
    _story(
        8,
        ("Ana Məsləhətləri", "Советы мамы"),
        UNSPLASH.format("photo-1522771739844-6a9f6d5f14af"),
        "/blog",
        ("Hamısına bax", "Посмотреть все"),
    ),
)


def _prose(title: str, *paragraphs: str) -> str:
    body = "".join(f"<p>{paragraph}</p>" for paragraph in paragraphs)
    return f'<div class="prose prose-lg max-w-none"><h1>{title}</h1>{body}</div>'


def _page(
    order: int,
    slug: str,
    title: tuple[str, str],
    content: tuple[str, str],
    meta_description: tuple[str, str],
) -> SeedRecord:
    return SeedRecord(
        collection_id="pages",
        key_fields=("slug",),
        data={
            "slug": slug,
            "title_az": title[0],
            "title_ru": title[1],
            "content_az": content[0],
            "content_ru": content[1],
            "meta_title_az": f"{title[0]} - Anacan.az",
            "meta_title_ru": f"{title[1]} - Anacan.az",
            "meta_description_az": meta_description[0],
            "meta_description_ru": meta_description[1],
        },
        # Older pages collections lack these attributes
        optional_data={"is_published": True, "order": order},
        permissions=EDITABLE_BY_USERS,
    )


PAGES = (
    _page(
        1,
        "haqqimizda",
        ("Haqqımızda", "О нас"),
        (
            _prose(
                "Haqqımızda",
                "Anacan.az - Azərbaycanda analıq və uşaq baxımı mövzusunda ən böyük və "
                "etibarlı online platformadır.",
                "Bizim missiyamız hər bir ananın və ailənin həyatını asanlaşdırmaq, peşəkar "
                "məsləhətlər və dəstək təmin etməkdir.",
                "Suallarınız və təklifləriniz üçün: info@anacan.az",
            ),
            _prose(
                "О нас",
                "Anacan.az - крупнейшая и надежная онлайн-платформа по материнству и уходу "
                "за детьми в Азербайджане.",
                "Наша миссия - облегчить жизнь каждой мамы и семьи, предоставляя "
                "профессиональные советы и поддержку.",
                "Для вопросов и предложений: info@anacan.az",
            ),
        ),
        (
            "Anacan.az haqqında məlumat. Azərbaycanda analıq və uşaq baxımı platforması.",
            "Информация о Anacan.az. Платформа по материнству и уходу за детьми в Азербайджане.",
        ),
    ),
    _page(
        2,
        "elaqe",
        ("Əlaqə", "Контакты"),
        (
            _prose(
                "Bizimlə Əlaqə",
                "Suallarınız, təklifləriniz və ya şikayətləriniz üçün bizə yazın.",
                "Email: info@anacan.az. Ünvan: Bakı, Azərbaycan.",
                "Biz adətən 24 saat ərzində cavab veririk.",
            ),
            _prose(
                "Свяжитесь с нами",
                "Напишите нам для вопросов, предложений или жалоб.",
                "Email: info@anacan.az. Адрес: Баку, Азербайджан.",
                "Обычно мы отвечаем в течение 24 часов.",
            ),
        ),
        (
            "Anacan.az ilə əlaqə saxlayın. Email, telefon və ünvan məlumatları.",
            "Свяжитесь с Anacan.az. Информация об email, телефоне и адресе.",
        ),
    ),
    _page(
        3,
        "mexfilik",
        ("Məxfilik Siyasəti", "Политика Конфиденциальности"),
        (
            _prose(
                "Məxfilik Siyasəti",
                "Anacan.az istifadəçilərinin məxfiliyyətinə hörmət edir və şəxsi "
                "məlumatların qorunmasına ciddi yanaşır.",
                "Biz şəxsi məlumatlarınızı üçüncü tərəflərlə paylaşmırıq, istisna olaraq "
                "qanuni tələblər olduqda.",
                "Məxfilik məsələləri ilə bağlı suallarınız üçün: info@anacan.az",
            ),
            _prose(
                "Политика Конфиденциальности",
                "Anacan.az уважает конфиденциальность пользователей и серьезно относится к "
                "защите личных данных.",
                "Мы не передаем ваши личные данные третьим лицам, за исключением случаев, "
                "когда это требуется по закону.",
                "По вопросам конфиденциальности: info@anacan.az",
            ),
        ),
        (
            "Anacan.az məxfilik siyasəti. Şəxsi məlumatların qorunması və istifadəsi.",
            "Политика конфиденциальности Anacan.az. Защита и использование личных данных.",
        ),
    ),
    _page(
        4,
        "istifade-qaydalari",
        ("İstifadə Qaydaları", "Условия Использования"),
        (
            _prose(
                "İstifadə Qaydaları",
                "Anacan.az saytından istifadə etməklə siz bu istifadə qaydalarını qəbul "
                "etmiş olursunuz.",
                "Saytımızın məzmunu yalnız məlumat məqsədi ilə təqdim olunur. Məzmun "
                "peşəkar məsləhət yerinə keçmir.",
                "Suallarınız üçün: info@anacan.az",
            ),
            _prose(
                "Условия Использования",
                "Используя сайт Anacan.az, вы принимаете эти условия использования.",
                "Контент нашего сайта предоставляется только в информационных целях и не "
                "заменяет профессиональную консультацию.",
                "По вопросам: info@anacan.az",
            ),
        ),
        (
            "Anacan.az istifadə qaydaları. Saytın istifadəsi və məsuliyyət.",
            "Условия использования Anacan.az. Использование сайта и ответственность.",
        ),
    ),
    _page(
        5,
        "gizlilik",
        ("Gizlilik Siyasəti", "Политика Безопасности"),
        (
            _prose(
                "Gizlilik Siyasəti",
                "Biz yalnız xidmətlərimizi təkmilləşdirmək üçün lazım olan məlumatları "
                "toplayırıq.",
                "Bütün məlumatlar şifrələnmiş formada saxlanılır və qorunur.",
                "Suallarınız üçün: info@anacan.az",
            ),
            _prose(
                "Политика Безопасности",
                "Мы собираем только ту информацию, которая необходима для улучшения наших услуг.",
                "Все данные хранятся и защищаются в зашифрованном виде.",
                "По вопросам: info@anacan.az",
            ),
        ),
        (
            "Anacan.az gizlilik siyasəti. Məlumatların qorunması və təhlükəsizlik.",
            "Политика безопасности Anacan.az. Защита данных и безопасность.",
        ),
    ),
)


# Named seed sets, loaded in this order when none are selected
SEED_SETS: dict[str, tuple[SeedRecord, ...]] = {
    "categories": CATEGORIES,
    "forums": FORUMS,
    "ad_spaces": AD_SPACES,
    "stories": STORIES,
    "pages": PAGES,
}


def select_seed_records(names: list[str] | tuple[str, ...] | None = None) -> list[SeedRecord]:
    """Flatten the named seed sets into one list of records.

    Raises:
        KeyError: If a name does not match any seed set.
    """
    selected = list(names) if names else list(SEED_SETS)
    unknown = [name for name in selected if name not in SEED_SETS]
    if unknown:
        raise KeyError(", ".join(unknown))
    return [record for name in selected for record in SEED_SETS[name]]
